"""
All the structures and pure functions to describe the resources and requests.

Resource kinds, request filters, raw bodies, patches, credentials,
and the transformations of the bodies before they are sent back to the API.

All the functions are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
