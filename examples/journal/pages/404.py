from wren.head import head


def component(data, params):
    head("<title>Not found | Journal</title>")
    return "<h1>Nothing here</h1><p>That page flew away.</p>"
