"""
General-purpose helpers not related to the library itself
(neither to the clients nor to the structs),
which are used to prepare and control the runtime environment.

Helpers do not depend on anything in the library. They could be extracted
as reusable snippets without any changes.
"""
