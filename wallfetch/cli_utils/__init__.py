"""
Console output, decorators and helpers shared by wallfetch subcommands.
"""
