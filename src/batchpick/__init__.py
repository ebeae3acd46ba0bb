"""Batch cherry-pick of commit URLs across a workspace of git checkouts."""
