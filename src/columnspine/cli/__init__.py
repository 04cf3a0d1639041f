"""columnspine command line interface."""
