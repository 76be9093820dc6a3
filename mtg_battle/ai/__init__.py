"""AI opponent"""
from .agent import AIAgent, AIController, Difficulty
