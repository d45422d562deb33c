"""Services: template selection, imports, generation, export and async helpers"""
