"""Command line front end for the rank card renderer."""
