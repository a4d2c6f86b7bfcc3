"""Channels, pipelines, worker pools and synchronisation helpers built on threads."""