"""
note-agent: AI collaboration on structured rich-text notes

Projects a note into a flat brief for the model and decodes the model's reply
into a typed edit action (reply / insert_node / modify_node).
"""

__version__ = "0.1.5"
