"""dupwatch: detecta mensagens curtas repetidas no mesmo dia local."""

__version__ = "0.1.0"
