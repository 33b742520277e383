"""
Seed projects and their work breakdown.

 3 Projects
 6 Milestones      (2 per project)
12 Tasks           (incl. 3 subtasks)
 3 Working groups  (1 per project)

Every row carries a ``n`` ordinal; references between rows use the ordinal
of the target (``project``, ``milestone``, ``parent``) and are turned into
reserved-range ids by the seed service.
"""

# ═════════════════════════════════════════════════════════════════════════════
# PROJECTS
# ═════════════════════════════════════════════════════════════════════════════

PROJECT_DATA = [
    {"n": 1, "title": "UBI Evidence Library", "slug": "ubi-evidence-library",
     "description": "Curated, citable summaries of basic income pilots and their outcomes.",
     "project_type": "research", "status": "active", "visibility": "public", "priority": "high",
     "linked_elements": ["GOAL-001", "STRAT-001", "CAP-002"], "progress": 35},
    {"n": 2, "title": "Automation Dividend Policy Draft", "slug": "automation-dividend-policy",
     "description": "Model legislation for taxing automated labor and distributing the proceeds.",
     "project_type": "initiative", "status": "planning", "visibility": "members", "priority": "medium",
     "linked_elements": ["GOAL-003", "STRAT-003", "CAP-001"], "progress": 10},
    {"n": 3, "title": "Community Onboarding Program", "slug": "community-onboarding",
     "description": "Welcome flow, mentoring pairs and starter tasks for new members.",
     "project_type": "campaign", "status": "active", "visibility": "public", "priority": "medium",
     "linked_elements": ["GOAL-008", "STRAT-004", "CAP-005"], "progress": 60},
]

# ═════════════════════════════════════════════════════════════════════════════
# MILESTONES
# ═════════════════════════════════════════════════════════════════════════════

MILESTONE_DATA = [
    {"n": 1, "project": 1, "title": "Pilot inventory complete", "status": "completed", "order_index": 0},
    {"n": 2, "project": 1, "title": "First 20 summaries published", "status": "in_progress", "order_index": 1},
    {"n": 3, "project": 2, "title": "Policy options paper", "status": "upcoming", "order_index": 0},
    {"n": 4, "project": 2, "title": "Draft bill for community review", "status": "upcoming", "order_index": 1},
    {"n": 5, "project": 3, "title": "Welcome flow live", "status": "completed", "order_index": 0},
    {"n": 6, "project": 3, "title": "Mentor roster filled", "status": "in_progress", "order_index": 1},
]

# ═════════════════════════════════════════════════════════════════════════════
# TASKS — parent must precede its subtasks
# ═════════════════════════════════════════════════════════════════════════════

TASK_DATA = [
    {"n": 1, "project": 1, "milestone": 1, "title": "List known basic income pilots", "status": "done", "priority": "high"},
    {"n": 2, "project": 1, "milestone": 2, "title": "Write summary template", "status": "done", "priority": "medium"},
    {"n": 3, "project": 1, "milestone": 2, "title": "Summarize North American pilots", "status": "in_progress", "priority": "high"},
    {"n": 4, "project": 1, "milestone": 2, "parent": 3, "title": "Stockton SEED summary", "status": "done", "priority": "medium"},
    {"n": 5, "project": 1, "milestone": 2, "parent": 3, "title": "Mincome summary", "status": "todo", "priority": "medium"},
    {"n": 6, "project": 2, "milestone": 3, "title": "Survey existing automation tax proposals", "status": "in_progress", "priority": "high"},
    {"n": 7, "project": 2, "milestone": 3, "title": "Estimate revenue under three scenarios", "status": "backlog", "priority": "medium"},
    {"n": 8, "project": 2, "milestone": 4, "title": "Draft bill text", "status": "backlog", "priority": "high"},
    {"n": 9, "project": 3, "milestone": 5, "title": "Publish welcome guide", "status": "done", "priority": "medium"},
    {"n": 10, "project": 3, "milestone": 6, "title": "Recruit mentors", "status": "in_progress", "priority": "high"},
    {"n": 11, "project": 3, "milestone": 6, "parent": 10, "title": "Mentor sign-up form", "status": "done", "priority": "low"},
    {"n": 12, "project": 3, "title": "Collect onboarding feedback", "status": "backlog", "priority": "low"},
]

# ═════════════════════════════════════════════════════════════════════════════
# WORKING GROUPS
# ═════════════════════════════════════════════════════════════════════════════

WORKING_GROUP_DATA = [
    {"n": 1, "project": 1, "name": "Research Circle", "slug": "research-circle",
     "description": "Reads, summarizes and fact-checks pilot studies.", "status": "active"},
    {"n": 2, "project": 2, "name": "Policy Drafting Group", "slug": "policy-drafting",
     "description": "Turns research into policy language.", "status": "forming"},
    {"n": 3, "project": 3, "name": "Welcome Team", "slug": "welcome-team",
     "description": "Greets and mentors new members.", "status": "active"},
]
