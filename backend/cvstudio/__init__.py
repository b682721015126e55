"""
CV Studio - CV editor state machine, template renderer and export gate
"""
from cvstudio.services.editor_session import EditorSession
from cvstudio.services.api_client import CVApiClient

__all__ = ['EditorSession', 'CVApiClient']
