"""Accounts: profile model, password hashing and the account service."""
