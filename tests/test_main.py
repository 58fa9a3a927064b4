"""Test for __main__.py module."""

from unittest.mock import patch


def test_main_module():
    """Test that __main__.py can be imported and calls cli."""
    # Mock the cli to prevent actual execution
    with patch('toolbox_container.cli.main.cli') as mock_cli:
        # Import should work without error
        import toolbox_container.__main__
        # CLI should not be called on import
        mock_cli.assert_not_called()
