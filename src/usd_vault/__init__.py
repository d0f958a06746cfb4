"""USD-denominated vault ledger."""
