"""
Journey-based testing of the blog application's user lifecycle.

Each module is one or more serial suites (``@pytest.mark.serial``): the tests
of a suite run in order, later tests consume what earlier ones produced
(credentials, a created post's address), and the first failure skips the
rest of the suite.

Journey Order:
    01 - Register and log in
    02 - Create a post, then comment on it
    03 - User settings (name, profile picture, password)
    04 - Post management (update, delete, owner-only edits) and logout
    05 - Comment management (edit, delete, owner-only edits)

Run with:
    pytest ui_tests/journeys -v
    pytest ui_tests/journeys -n 4   # suites in parallel, one worker per suite
"""
