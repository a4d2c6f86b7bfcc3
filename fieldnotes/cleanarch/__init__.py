"""A user service split into domain, repository and service layers."""