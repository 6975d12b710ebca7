"""Root conftest: places the project root on sys.path for the test suite."""
