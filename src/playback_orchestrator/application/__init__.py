"""
Application Layer

Orchestrates the domain queue against the external audio node.

Structure:
- interfaces/: Ports for the node client, search resolver and voice gateway
- services/: Player, transition engine, manager and bundled autoplay
"""
