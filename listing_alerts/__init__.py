"""New-listing notification service for the property marketplace."""
