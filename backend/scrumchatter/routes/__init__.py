# Routes package init
"""
Scrum Chatter Backend: API Routes Package
==========================================

Route Inventory:
    - teams.py:    /api/teams, team rosters, member creation, meetings
    - members.py:  /api/members/{id} get / rename / delete
    - dialogs.py:  /api/dialogs headless validate-as-you-type dialogs
    - health.py:   GET /health

Routes stay thin: they translate HTTP into service and dialog calls.
"""
