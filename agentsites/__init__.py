"""agentsites: agent-site management service (role hierarchy and master-to-branch propagation)."""
