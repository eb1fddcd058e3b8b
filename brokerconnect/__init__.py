"""BrokerConnect API - real-estate broker marketplace backend"""

__version__ = "1.0.0"
