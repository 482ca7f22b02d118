from django import template

register = template.Library()


@register.simple_tag(takes_context=True)
def query_replace(context, **kwargs):
    """
    Current query string with some params replaced. Changing anything but
    the page drops the page number, so new results start on page 1.
    Usage: <a href="{% query_replace page=3 %}">
    """
    query = context['request'].GET.copy()
    if 'page' not in kwargs:
        query.pop('page', None)
    for key, value in kwargs.items():
        if value in (None, ''):
            query.pop(key, None)
        else:
            query[key] = value
    encoded = query.urlencode()
    return f'?{encoded}' if encoded else '?'


@register.simple_tag(takes_context=True)
def sort_query(context, key):
    """Query string for a column header: same key toggles, a new key starts ascending."""
    state = context['state']
    sort, direction = state.next_sort(key)
    return query_replace(context, sort=sort, direction=direction)


@register.filter
def is_selected(value, values):
    """
    Whether ``value`` is among the selected filter values.
    Usage: {% if option.pk|is_selected:state.filters.class %}
    """
    return str(value) in (values or ())


@register.filter
def sort_indicator(state, key):
    if state.sort != key:
        return ''
    return '▲' if state.direction == 'asc' else '▼'
