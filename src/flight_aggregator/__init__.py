"""
Flight Aggregator - Busca agregada de ofertas de voo
"""
__version__ = "0.1.0"
