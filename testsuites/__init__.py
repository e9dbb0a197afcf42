"""
Test suites package.

`testsuites` is importable so the framework, page objects and the
command line tools share one code base:
  - testsuites.api_testing.framework: HTTP client, config, tokens, classifier
  - testsuites.api_testing.pages: endpoint wrappers
  - testsuites.api_testing.tests: live API suite
  - testsuites.unit: offline unit tests of the framework
"""
