# Services package init
"""
Scrum Chatter Backend: Services Layer
======================================

What:  Business logic between routes / dialogs and the database.

Service Inventory:
    - MemberService: member record store (create, rename, soft delete, stats)
    - MemberNameValidator: member-name uniqueness check for input dialogs
    - TeamService: teams and meetings
    - BackgroundExecutor: runs store mutations off the requesting code path
"""
