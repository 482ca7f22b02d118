from django import forms


class ScopedModelForm(forms.ModelForm):
    """
    ModelForm that knows who is filling it in.
    Subclasses narrow their choice querysets in ``scope_choices``.
    """

    def __init__(self, *args, user=None, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            widget = field.widget
            if isinstance(widget, (forms.Select, forms.SelectMultiple)):
                widget.attrs.setdefault('class', 'form-select')
            elif isinstance(widget, forms.Textarea):
                widget.attrs.setdefault('class', 'form-textarea')
            elif isinstance(widget, forms.CheckboxInput):
                widget.attrs.setdefault('class', 'form-checkbox')
            else:
                widget.attrs.setdefault('class', 'form-input')
        if user is not None:
            self.scope_choices(user)

    @property
    def is_create(self):
        return self.instance.pk is None

    def scope_choices(self, user):
        pass
