"""
Calendar Page Editor - Main window mixins

- config_mixin.py: settings file, recent imports
- event_mixin.py: window-level key, resize and close events
- generator_mixin.py: content/image generation and export in the background
- history_mixin.py: undo/redo actions and the status bar
- menu_mixin.py: menus, toolbar and their dialogs
"""
