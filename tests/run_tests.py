import unittest
import sys
import os

# Add the parent directory to the Python path so we can import the chat_agent module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Import all test modules
from tests.test_codeblocks import TestCodeBlocks
from tests.test_history import TestHistoryStore
from tests.test_session import TestSession
from tests.test_client import TestOpenAIChatClient, TestClientFromSettings
from tests.test_config import TestSettings
from tests.test_cli import TestCLI

if __name__ == '__main__':
    # Create a test suite with all test cases
    test_suite = unittest.TestSuite()

    # Add test cases from each module
    for case in (
        TestCodeBlocks,
        TestHistoryStore,
        TestSession,
        TestOpenAIChatClient,
        TestClientFromSettings,
        TestSettings,
        TestCLI,
    ):
        test_suite.addTests(unittest.TestLoader().loadTestsFromTestCase(case))

    # Run the tests
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(test_suite)
    sys.exit(not result.wasSuccessful())
