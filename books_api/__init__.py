"""Books API: Buddhist Era submissions, Gregorian storage, author-indexed reads."""
