"""
Built in wallfetch subcommands. Every module here defines a click command named 'cli'.
"""
