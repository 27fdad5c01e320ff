"""
snulinks_smoke drives a real browser against the SNULinks portal, one fresh
session per check, and leaves a screenshot of how every check ended.

browser - session lifecycle and the wait engine
runner - the per-check lifecycle: setup, check, evidence, teardown
checks - the portal checks themselves
plugin - pytest fixtures and the run report
"""
