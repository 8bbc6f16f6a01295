"""Services shared by every resource."""
