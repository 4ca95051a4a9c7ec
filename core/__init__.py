"""core/ -- Configuration and notification services shared by every layer.

Layer rule: core/ is the kernel. It does not import from api/, auth/, or cities/.
"""
