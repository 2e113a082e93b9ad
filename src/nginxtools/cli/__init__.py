"""Command line interface for NGINX Tools."""
