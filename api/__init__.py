"""
Wortle API
Serverless backend for the Wortle German vocabulary game
"""
