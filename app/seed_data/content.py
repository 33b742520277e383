"""
Seed content items and tags.

6 Tags
4 Content items (published, public)

Bodies are short placeholders; editors replace them through the CMS.
"""

TAG_DATA = [
    {"n": 1, "name": "Basic Income", "slug": "basic-income", "color": "#2563EB"},
    {"n": 2, "name": "Automation", "slug": "automation", "color": "#DC2626"},
    {"n": 3, "name": "Data Rights", "slug": "data-rights", "color": "#7C3AED"},
    {"n": 4, "name": "Policy", "slug": "policy", "color": "#059669"},
    {"n": 5, "name": "Community", "slug": "community", "color": "#D97706"},
    {"n": 6, "name": "Research", "slug": "research", "color": "#6B7280"},
]

CONTENT_DATA = [
    {"n": 1, "slug": "seed-what-is-post-labor-economics", "title": "What Is Post-Labor Economics?",
     "content_type": "article", "project": None, "tags": ["automation", "policy"],
     "excerpt": "An introduction to the economics of a world where machines do most of the work."},
    {"n": 2, "slug": "seed-basic-income-pilots-overview", "title": "Basic Income Pilots: An Overview",
     "content_type": "guide", "project": 1, "tags": ["basic-income", "research"],
     "excerpt": "Where basic income has been tried, and what the studies found."},
    {"n": 3, "slug": "seed-your-data-your-dividend", "title": "Your Data, Your Dividend",
     "content_type": "article", "project": None, "tags": ["data-rights", "policy"],
     "excerpt": "Why personal data should earn its owners an income."},
    {"n": 4, "slug": "seed-getting-started", "title": "Getting Started in the Community",
     "content_type": "guide", "project": 3, "tags": ["community"],
     "excerpt": "How to join a working group, vote on proposals and pick up a first task."},
]
