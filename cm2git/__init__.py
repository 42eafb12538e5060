"""GitHub repository activity feed: pull requests, commits and merges"""
