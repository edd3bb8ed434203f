import inspect

import statblog.logger
import statblog.ui_components as ui


def test_every_helper_is_documented():
    helpers = [f for name, f in inspect.getmembers(ui, inspect.isfunction)
               if f.__module__ == ui.__name__ and not name.startswith("_")]
    assert helpers
    assert [f.__name__ for f in helpers if not f.__doc__] == []
    assert statblog.logger.__doc__
