"""A layered in-memory task API served over WSGI."""