"""Terminal output for review-bot."""
