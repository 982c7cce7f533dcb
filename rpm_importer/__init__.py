"""rpm-importer -- wraps an existing PNC build into a pom.xml inside a dist-git repository."""

__version__ = "0.1.0"
