"""
CBY Helper - shipment scanning helper for warehouse sortation.
Resolves scanned AWB payloads to destination hub, sack and OSA lane.
"""

__version__ = "0.1.0"
