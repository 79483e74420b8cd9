"""
Scanner package: payload resolution, screen state, background refresh
and the session that ties them together.
"""
