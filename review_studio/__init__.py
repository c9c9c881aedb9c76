"""
Review Studio - product URL to localized review article
"""
