import os

import pytest


@pytest.fixture(scope="session")
def qapp():
    """A QApplication on the offscreen platform, shared by the widget tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    pytest.importorskip("PySide6")
    pytest.importorskip("pyqtgraph")

    from fluidbrush.app import create_app

    return create_app([])
