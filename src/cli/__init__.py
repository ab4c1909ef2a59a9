"""Command line interface of the OWL to graph importer."""
