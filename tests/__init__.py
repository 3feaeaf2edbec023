"""
Test suite for Console QA.

Test Structure:
- test_classifier.py / test_extractor.py: title parsing, status mapping, flattening
- test_aggregator.py / test_history.py / test_csv_export.py: dashboard data
- test_recorder.py / test_delivery.py: spreadsheet rows and redirect handling
- test_notifier.py / test_publisher.py: email report, git publish, dispatch
- test_plugin.py / test_run_report.py: pytest integration
- e2e/: browser scenarios against the live console (-m e2e)

Run all tests:
    pytest tests/ -v

Run with coverage:
    pytest tests/ -v --cov=src/console_qa
"""
