"""
Note Agents - LangGraph agents for note editing
"""

from note_agent.agents.base_agent import BaseAgent
from note_agent.agents.note_editing_agent import NoteEditingAgent, get_note_editing_agent

__all__ = [
    'BaseAgent',
    'NoteEditingAgent',
    'get_note_editing_agent'
]
