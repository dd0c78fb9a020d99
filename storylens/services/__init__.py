"""
Services for story generation, relay and analysis.
"""
