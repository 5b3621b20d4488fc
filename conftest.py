"""Root conftest: loads the serial-suite plugin for every test under this repository."""

pytest_plugins = ["blog_journeys.plugin", "pytester"]
