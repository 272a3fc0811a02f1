"""HTTP receiver for Slack deliveries and liveness probes.

Entry point: projectbot (console script)
"""
