"""
Template tags for composing Tailwind class strings.

    {% load classnames %}
    <div class="{% cn 'rounded-lg border p-6' extra_classes %}">
"""

from django import template

from apps.core.utils.classnames import cn as merge_classes

register = template.Library()


@register.simple_tag
def cn(*inputs):
    return merge_classes(*inputs)
