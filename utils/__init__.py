"""Personal Library - Helpers Package

- Request field presence checks (validators.py)
- CLI output rendering in plain/json/rich modes (ui_helpers.py)
"""
