"""Protocol interfaces between the core engine and its collaborators."""
