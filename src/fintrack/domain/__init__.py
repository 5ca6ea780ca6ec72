"""Domain types and repository protocols for the ledger."""
