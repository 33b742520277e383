"""
Community Governance Platform
Blueprint package.

Each module exposes one ``Blueprint`` registered in ``app.create_app``:
    votes_bp, proposals_bp, architecture_bp, activity_bp, health_bp
"""
