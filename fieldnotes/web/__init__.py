"""Small WSGI applications and middleware."""