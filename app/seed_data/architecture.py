"""
Governance architecture — goals, strategies, capabilities, principles.

 9 Goals
 6 Strategies    (each supports a goal)
 8 Capabilities  (each realises a strategy)
10 Principles

Rows are (code, title, description, parent_code). Parents must appear earlier
in ``ELEMENT_DATA`` than their children.
"""

# ═════════════════════════════════════════════════════════════════════════════
# GOALS
# ═════════════════════════════════════════════════════════════════════════════

GOALS = [
    ("GOAL-001", "Universal Basic Income", "Establish economic security through unconditional basic income for all citizens", None),
    ("GOAL-002", "Data Ownership Rights", "Ensure individuals own and control their personal data with fair compensation", None),
    ("GOAL-003", "Automation Taxation", "Implement fair taxation on automated labor to fund social programs", None),
    ("GOAL-004", "Worker Transition Support", "Provide comprehensive support for workers displaced by automation", None),
    ("GOAL-005", "Democratic Economic Governance", "Enable democratic participation in economic policy decisions", None),
    ("GOAL-006", "Evidence-Based Policy", "Ground all proposals in rigorous research and empirical evidence", None),
    ("GOAL-007", "Public Awareness", "Build broad public understanding of post-labor economics concepts", None),
    ("GOAL-008", "Coalition Building", "Unite diverse stakeholders around shared prosperity goals", None),
    ("GOAL-009", "Institutional Reform", "Transform institutions to support post-labor economic models", None),
]

# ═════════════════════════════════════════════════════════════════════════════
# STRATEGIES
# ═════════════════════════════════════════════════════════════════════════════

STRATEGIES = [
    ("STRAT-001", "Research & Analysis", "Conduct and synthesize research on post-labor economics", "GOAL-006"),
    ("STRAT-002", "Public Education", "Educate the public through content, events, and media", "GOAL-007"),
    ("STRAT-003", "Policy Development", "Develop concrete policy proposals and frameworks", "GOAL-001"),
    ("STRAT-004", "Community Building", "Build engaged communities of practitioners and advocates", "GOAL-008"),
    ("STRAT-005", "Pilot Programs", "Design and support pilot implementations", "GOAL-004"),
    ("STRAT-006", "Stakeholder Engagement", "Engage policymakers, businesses, and civil society", "GOAL-009"),
]

# ═════════════════════════════════════════════════════════════════════════════
# CAPABILITIES
# ═════════════════════════════════════════════════════════════════════════════

CAPABILITIES = [
    ("CAP-001", "Policy Analysis", "Analyze existing and proposed economic policies", "STRAT-003"),
    ("CAP-002", "Research Synthesis", "Synthesize academic research into actionable insights", "STRAT-001"),
    ("CAP-003", "Advocacy & Outreach", "Advocate for post-labor policies to decision makers", "STRAT-006"),
    ("CAP-004", "Content Production", "Create articles, videos, podcasts, and educational materials", "STRAT-002"),
    ("CAP-005", "Community Facilitation", "Facilitate discussions and working groups", "STRAT-004"),
    ("CAP-006", "Event Management", "Organize webinars, conferences, and community events", "STRAT-002"),
    ("CAP-007", "Data Analysis", "Analyze economic data and model scenarios", "STRAT-001"),
    ("CAP-008", "Partnership Development", "Build partnerships with aligned organizations", "STRAT-006"),
]

# ═════════════════════════════════════════════════════════════════════════════
# PRINCIPLES
# ═════════════════════════════════════════════════════════════════════════════

PRINCIPLES = [
    ("PRIN-001", "Human Dignity First", "All policies must prioritize human dignity and wellbeing", None),
    ("PRIN-002", "Evidence-Based Approach", "Decisions grounded in research and empirical evidence", None),
    ("PRIN-003", "Inclusive Participation", "Ensure diverse voices in all decision-making processes", None),
    ("PRIN-004", "Transparency", "Operate with full transparency in governance and finances", None),
    ("PRIN-005", "Open Source First", "Prefer open source tools and open knowledge sharing", None),
    ("PRIN-006", "Pragmatic Idealism", "Balance ambitious vision with practical implementation", None),
    ("PRIN-007", "Federated Governance", "Distribute power across community working groups", None),
    ("PRIN-008", "Continuous Learning", "Embrace iteration and learning from failures", None),
    ("PRIN-009", "Solidarity Economy", "Model the economic principles we advocate", None),
    ("PRIN-010", "Long-term Thinking", "Plan for generational impact, not quick wins", None),
]

ELEMENT_DATA = (
    [("goal", *row) for row in GOALS]
    + [("strategy", *row) for row in STRATEGIES]
    + [("capability", *row) for row in CAPABILITIES]
    + [("principle", *row) for row in PRINCIPLES]
)

_CODE_PREFIX_NUMBERS = {"GOAL": 1, "STRAT": 2, "CAP": 3, "PRIN": 4}


def element_seed_number(code: str) -> int:
    """Stable ordinal for an element code: GOAL-001 → 1001, PRIN-010 → 4010."""
    prefix, _, number = code.partition("-")
    return _CODE_PREFIX_NUMBERS[prefix] * 1000 + int(number)
