# Dialogs package init
"""
Scrum Chatter Backend: Input Dialogs
=====================================

What:  Headless validate-as-you-type input dialogs.

Module Inventory:
    - validation.py:      InputValidator interface, DialogContext, ValidationResult
    - input_dialog.py:    InputDialog controller and open_input_dialog()
    - registry.py:        Open dialog sessions, by id
    - member_dialogs.py:  Create / rename / delete member flows
"""
